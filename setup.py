from setuptools import setup, find_packages


def read_requirements(path):
    with open(path) as f:
        return [
            line.strip()
            for line in f
            if line.strip() and not line.startswith('#')
        ]


setup(
    name="shotify",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=read_requirements('requirements.txt'),
    extras_require={"test": read_requirements('requirements-test.txt')},
    python_requires=">=3.8",
)
