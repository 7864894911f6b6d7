import setuptools

setuptools.setup(
    name="riskquiz",
    version="0.1.0",
    description="A real-time two-arm experiment server: participants take a complex or simple quiz, then choose between a risky and a safe payoff.",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
    ],
    extras_require={
        "server": [
            "eventlet",
            "flask",
            "flask-socketio",
            "pandas",
            "flatten_dict",
        ],
        "test": [
            "pytest>=8.0",
            "pytest-timeout>=2.3",
        ],
    },
)
