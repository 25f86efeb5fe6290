from setuptools import setup, find_namespace_packages


setup(
    name='forgd_sale',
    version='0.1',
    packages=find_namespace_packages(where="src", include=["forgd_sale*"]),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        'pydantic>=2',
        'flask>=2.2',
        'flask-openapi3>=3',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'forgd_sale = forgd_sale.webapi.webapi:main',
        ],
    },
)
