#!/usr/bin/env python
import os
import re

from setuptools import setup, find_packages


def read(name):
    filename = os.path.join(os.path.dirname(__file__), name)
    with open(filename) as fp:
        return fp.read()


def requirements(name):
    install_requires = []
    dependency_links = []

    for line in read(name).split('\n'):
        if line.startswith('-e '):
            link = line[3:].strip()
            if link == '.':
                continue
            dependency_links.append(link)
            line = link.split('=')[1]
        line = line.strip()
        if line:
            install_requires.append(line)

    return install_requires, dependency_links


def version():
    init = read(os.path.join('curlup', '__init__.py'))
    bits = re.search(r'VERSION = \((\d+), (\d+), (\d+), \'(\w+)\', (\d+)\)',
                     init).groups()
    v = '.'.join(bits[:3])
    if bits[3] != 'final':
        v = '%s%s%s' % (v, {'alpha': 'a', 'beta': 'b'}.get(bits[3], bits[3]),
                        bits[4])
    return v


meta = dict(
    name='curlup',
    version=version(),
    description='CouchDB request builders executed over libcurl',
    url="https://github.com/curlup/curlup",
    license="ISC",
    long_description=read('README.rst'),
    include_package_data=True,
    install_requires=requirements('requirements/hard.txt')[0],
    extras_require={'test': requirements('requirements/test.txt')[0]},
    python_requires='>=3.7',
    packages=find_packages(include=['curlup', 'curlup.*']),
    test_suite='tests',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: ISC License (ISCL)',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Database :: Front-Ends',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries :: Python Modules']
)


if __name__ == '__main__':
    setup(**meta)
