#!/usr/bin/env python3

from setuptools import setup, find_packages
import os


directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="glyphbake",
        packages=find_packages(include=["glyphbake", "glyphbake.*"]),
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="TrueType glyph atlas baker and batched bitmap text renderer",
        author="mirmik",
        author_email="mirmikns@yandex.ru",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["font", "bmfont", "atlas", "opengl"],
        classifiers=[],
        install_requires=[
            "numpy",
            "PyOpenGL>=3.1",
            "glfw>=2.5.0",
            "Pillow>=10.1",
            "fonttools>=4.0",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": [
                "glyphbake-bake=glyphbake.apps.bake:main",
                "glyphbake-preview=glyphbake.apps.preview:main",
            ],
        },
        zip_safe=False,
    )
