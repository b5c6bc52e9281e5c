[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "muffinmedia"
version = "0.1.0"
description = "Small pure-Python toolkit for media file formats: byte streams, CRC-32, a lenient JSON parser, TrueType glyphs, PNG, MP3 frame headers and NAL headers"
requires-python = ">=3.10"
dependencies = []
keywords = ["png", "truetype", "ttf", "mp3", "h264", "nal", "json", "bytestream", "crc32", "bezier"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Text Processing :: Fonts",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["muffinmedia"]

[tool.pytest.ini_options]
addopts = "-ra"
