from setuptools import setup, find_namespace_packages


setup(
    name="da.memo",
    version="0.0.1",
    packages=find_namespace_packages('src', include=['da', 'da.*']),
    package_dir={
        '': 'src',
    },
    python_requires='>=3.6',
    install_requires=['blessings'],
    extras_require={
        'test': ['pytest'],
    },
)
