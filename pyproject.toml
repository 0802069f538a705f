[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelkit"
version = "0.1.0"
description = "Pixel buffers in indexed and direct colour formats, with drawing, palettes, PNG I/O, Game of Life and Mandelbrot rendering"
requires-python = ">=3.10"
keywords = ["image", "pixel", "rgb565", "dither", "palette", "png", "life", "mandelbrot"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pixelkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
