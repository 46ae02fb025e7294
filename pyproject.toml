[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "livesim"
version = "0.1.0"
description = "Building blocks for a live DASH simulator: wrap-around timelines, segment availability, segment addressing, TTML time shifting, URL parameter parsing and WSGI helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["dash", "mpeg-dash", "live", "streaming", "mpd", "segment-timeline", "ttml", "wsgi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["livesim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
