from glob import glob
from setuptools import setup


setup(
    name='keycalc',
    version='0.1.0',
    description='Infix calculator engine, fed one key at a time',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['keycalc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.7',
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
