import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="atcstruct",
    version="0.0.1",
    description="ATC electrocardiogram containers for humans",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests"]),
    install_requires=[
        'bitstring',
        'pillow',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'atc2json=atcstruct.cli:atc2json',
            'atcdump=atcstruct.cli:atcdump',
            'atcdisplay=atcstruct.cli:atcdisplay',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
