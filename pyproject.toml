[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stegodisk"
version = "0.1.0"
description = "Context fitness selection and JPEG double-compression embedding primitives for image steganography"
requires-python = ">=3.10"
dependencies = []
keywords = ["steganography", "dct", "jpeg", "quantization", "double compression", "lsb"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stegodisk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
