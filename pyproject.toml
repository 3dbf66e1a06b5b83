[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mecabot"
version = "0.1.0"
description = "Mecanum-wheel robot base control over RoboClaw motor controllers, with a UDP joystick remote"
requires-python = ">=3.10"
keywords = ["roboclaw", "mecanum", "robot", "odometry", "kinematics", "joystick", "udp", "serial"]
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
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]
dependencies = [
    "pyserial",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mecabot-remote = "mecabot.app:main"

[tool.hatch.build.targets.wheel]
packages = ["mecabot"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
