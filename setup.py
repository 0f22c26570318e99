import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="batchcodec",
    version="0.0.1",
    description="Charset conversion of record oriented batch files (UTF-8, JIS, EBCDIC)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        'bitstring<5',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
