#!/usr/bin/python3

from setuptools import setup

setup(name='python-falcon8',
      version='0.1',
      py_modules=[],
      packages=['falcon8'],
      scripts=[
          'bin/falcon8-report',
      ],
      install_requires=['pyusb >= 1.0.0', 'pyyaml >= 3.12'],
      extras_require={
          'test': ['pytest'],
      },
      data_files=[
          ('share/python-falcon8/', ['falcon8.yaml.example']),
      ])
