# !/usr/bin/env python

from setuptools import setup, find_packages

setup(
    name='pyjamf',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
      'attrs>=20.1.0',
      'marshmallow>=3.18.0',
      'python-dotenv',
      'iso8601',
    ],
    extras_require={
      'test': ['pytest'],
    },
    python_requires='>=3.8',
    version='0.1.0',
    description='Typed, validated and change-tracking objects for the Jamf Pro APIs',
    license='BSD',
    keywords=['jamf', 'macadmin', 'mdm'],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'Natural Language :: English',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Topic :: Software Development',
        'Topic :: System :: Systems Administration',
    ],
)
