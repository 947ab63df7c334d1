from setuptools import setup, find_packages
setup(
    name='jargo',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    description='Build tool for Java applications driven by a declarative descriptor.',
    author='Your Name',
    author_email='youremail@example.com',
    python_requires='>=3.11',  # tomllib
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'requests>=2.25.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'jargo = jargo.__main__:main',
        ],
    },
)
