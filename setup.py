"""Setup script for Blueprint Studio."""
from setuptools import setup, find_packages

setup(
    name="blueprint-studio",
    version="1.0.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="AI pipeline that turns a creative brief into a complete YouTube production blueprint",
    url="https://github.com/yourusername/blueprint_studio",
    packages=find_packages(include=["pipeline", "pipeline.*"]),
    py_modules=["api", "config", "errors", "models", "orchestrator", "example"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=[
        # Core
        "fastapi>=0.104.1",
        "uvicorn[standard]>=0.24.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",

        # AI
        "openai>=1.3.7",

        # Utilities
        "python-dotenv>=1.0.0",
        "httpx>=0.25.2",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },
)
