"""
Setup file for the Resume Interviewer package.
"""
from setuptools import setup, find_packages

setup(
    name="resume_interviewer",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "python-multipart>=0.0.9",
        "slowapi>=0.1.9",
        "langchain-core>=0.2.0",
        "langchain-google-genai>=1.0.0",
        "pydantic>=2.5.2",
        "python-dotenv>=1.0.0",
        "pymongo>=4.6.0",
        "httpx>=0.27.0",
        "pdfplumber>=0.10.0",
        "python-docx>=1.1.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "resume-interviewer=resume_interviewer.cli:cli",
        ],
    },
    python_requires=">=3.9",
    author="Resume Interviewer Team",
    author_email="your.email@example.com",
    description="Resume-driven technical interviews with generated questions and scoring",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
