#!/usr/bin/env python3

from setuptools import find_namespace_packages, setup


def get_version():
    with open("debian/changelog", "r", encoding="utf-8") as f:
        return f.readline().split()[1][1:-1]


setup(
    name="wb-mqtt-homekit",
    version=get_version(),
    description="HomeKit characteristics for Wiren Board MQTT controls",
    license="MIT",
    maintainer="Wiren Board Team",
    maintainer_email="info@wirenboard.com",
    url="https://github.com/wirenboard/wb-mqtt-homekit",
    packages=find_namespace_packages(include=["wb.*"]),
    python_requires=">=3.8",
    install_requires=[
        "paho-mqtt>=2.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "wb-mqtt-homekit = wb.mqtt_homekit.client.main:main",
        ],
    },
)
