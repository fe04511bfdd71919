from setuptools import setup  # type: ignore

setup(
    name="famcal",
    version="0.0.0",
    packages=[
        "famcal",
        "famcal.api",
        "famcal.api.endpoints",
        "famcal.api.infra",
        "famcal.application",
        "famcal.application.calendar",
        "famcal.application.session",
        "famcal.application.update",
        "famcal.application.user",
        "famcal.domain",
        "famcal.domain.repo",
    ],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2",
        "uvicorn",
        "passlib[argon2]",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
