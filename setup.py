"""Package setup."""

from pathlib import Path

from setuptools import setup, find_packages

import version

long_description = (Path(__file__).parent / 'README.md').read_text()

setup(
    name='tzsource',
    version=version.get_version(),
    description=(
        "Timezone and country metadata from interchangeable data sources."
    ),
    long_description=long_description,
    long_description_content_type="text/markdown",

    keywords=(
        'timezone',
        'zoneinfo',
        'tzdata',
    ),
    license='MIT',

    zip_safe=False,

    packages=find_packages(),
    package_data={
        'tzsource.config': ['schema.yaml'],
    },
    include_package_data=True,

    classifiers=(
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Natural Language :: English',
        'Operating System :: POSIX',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Software Development :: Localization',
    ),

    python_requires='>=3.9',

    install_requires=(
        'click',
        'layer-loader',
        'pyyaml >= 5',
        'jsonschema >=3',
        'python-dateutil',
        'tzdata',
    ),

    extras_require={
        'test': (
            'pytest',
            'pytest-cov',
            'networkx',
        ),
    },

    entry_points={
        'console_scripts': (
            'tzsource = tzsource.cli:main',
        ),
    },
)
