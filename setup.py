# setup.py
from setuptools import setup, find_packages

setup(
    name="finance-client",
    version="0.1.0",
    description="CLI and web dashboard for a personal-finance REST API",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"webapp": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "pandas>=1.1",
        "anyio>=3.0",
        "prompt_toolkit>=3.0.36",
        "fastapi>=0.108",
        "pydantic>=2.0",
        "jinja2>=3.0",
        "python-multipart>=0.0.6",
        "plotly>=5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "finance=finance_client.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
