"""
Steam Auth Service

Steam OpenID 2.0 authentication strategy with optional Steam Web API
profile enrichment, plus a FastAPI service exposing it.
"""

from setuptools import setup, find_namespace_packages

setup(
    name="steam-auth-service",
    version="1.0.0",
    description="Steam OpenID 2.0 authentication strategy and service",
    author="Steam Auth Service Contributors",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["steam_auth", "steam_auth.*"]),
    python_requires=">=3.11",
    install_requires=[
        # Web service
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",

        # Models and configuration
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",

        # Steam Web API
        "httpx>=0.26.0",

        # OpenID 2.0 consumer
        "python3-openid>=3.2.0",

        # Session tokens
        "python-jose[cryptography]>=3.3.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "black>=23.10.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.11",
        "License :: Other/Proprietary License",
    ],
)
