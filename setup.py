from setuptools import setup, find_packages

setup(
    name="pagescript",
    version="0.1.0",
    description="pagescript - скрипты автоматизации страниц: исполнение, запись макросов, периодические задачи",
    author="pagescript Team",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    package_data={"pagescript.resources": ["*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "typer>=0.16.0",
        "rich>=13.7.1",
        "pydantic>=2.6",
        "PyYAML>=6.0.2",
        "python-dotenv>=1.0.1",
        "httpx>=0.27.0",
        "beautifulsoup4>=4.12.3",
        "soupsieve>=2.5",
    ],
    extras_require={
        "test": [
            "pytest>=8.3.2",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "pagescript=pagescript.apps.cli.app:app",  # команда `pagescript`
        ],
    },
)
