[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trimeshkit"
version = "1.0.0"
description = "Edge-based polygonal surface meshes with connectivity queries, volume measures and clustering metrics."
requires-python = ">=3.10"
dependencies = []
keywords = ["mesh", "triangle mesh", "surface", "geometry", "half-edge", "clustering", "voronoi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["trimeshkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
