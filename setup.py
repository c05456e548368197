from setuptools import setup, find_packages

setup(
    name="portal-smoke",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests>=2.28",
        "PyYAML>=6.0",
        "jsonpath-ng>=1.5.3",
        "Jinja2>=3.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "flake8>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "portal-smoke=portal_smoke.system_tester:main_cli",
        ],
    },
)
