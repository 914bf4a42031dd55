from setuptools import find_packages, setup
from splitapk import __version__

setup(
    name="splitapk",
    packages=find_packages(exclude=('tests', 'tests.*')),
    version=__version__,
    description="Classify split apks (apks, apkm, xapk) and select the ones a device needs",
    long_description=(open('README.md', encoding='utf-8').read()),
    long_description_content_type="text/markdown",
    author='splitapk contributors',
    license='MIT',
    keywords='apk, split apk, apks, apkm, xapk, abi, density, locale',
    python_requires='>=3.8',
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['splitapk=splitapk.cli:main'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Utilities',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
