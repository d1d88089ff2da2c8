from setuptools import setup, find_packages
import restructure


with open('readme.rst') as f:
    long_description = f.read()


setup(
    name='restructure',
    description="Recover high-level control flow primitives from control flow graphs",
    long_description=long_description,
    version=restructure.__version__,
    include_package_data=True,
    packages=find_packages(exclude=["*.test.*", "test", "test.*"]),
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'restructure = restructure.cli.restructure:restructure',
        ]
    },
    license='BSD',
    classifiers=[
        'License :: OSI Approved :: BSD License',
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Programming Language :: Python :: Implementation :: PyPy',
        'Topic :: Software Development :: Disassemblers',
        'Topic :: Software Development :: Compilers',
    ]
)
