from setuptools import find_packages, setup

with open("VERSION", "r") as version_file:
    version = version_file.read().strip()

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mljboard-client",
    version=version,
    packages=find_packages(include=["mljboard_client", "mljboard_client.*"]),
    install_requires=[
        "aiohttp>=3.8.0,<3.14",
        "websockets>=14.0",
        "click>=8.0.0",
        "pyyaml>=6.0",
        "pydantic>=2.11.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "pytest-mock>=3.10.0",
            "aioresponses>=0.7.4",
            "trustme>=1.0.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "mljboard-client=mljboard_client.client.cli:main",
        ],
    },
    python_requires=">=3.9",
    description="mljboard client - reach a local HTTP service through an HOS relay",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Networking",
        "Topic :: Internet :: WWW/HTTP",
        "Operating System :: OS Independent",
    ],
    keywords="tunnel, reverse-proxy, websocket, relay, localhost",
)
