from setuptools import setup, find_packages

setup(
    name="uiauto-search",
    version="1.0.0",
    packages=find_packages(include=["uiauto_search", "uiauto_search.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
        "inflection>=0.5.1",
        "pillow>=8.0.0",
        "pywinauto>=0.6.8; platform_system == 'Windows'",
        "comtypes>=1.1.7; platform_system == 'Windows'",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uiauto_search": ["schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uiauto-search=uiauto_search.cli:main",
        ],
    },
)
