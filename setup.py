from setuptools import setup, find_packages

setup(
    name="invisinsights",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "langchain-core",
        "langchain-openai",
        "langgraph",
        "python-dotenv",
        "pydantic>=2.6",
        "typing-extensions",
        "requests",
        "fastapi",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        'console_scripts': [
            'invisinsights=invisinsights.main:main',
        ],
    },
    author="InvisInsights",
    description="Behavioural session analysis to survey responses",
    python_requires=">=3.9",
)
