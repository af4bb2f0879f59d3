# type: ignore
from setuptools import find_packages, setup

# Get VERSION constant from mpflags.version - we can't simply import that module because
# mpflags/__init__.py imports modules that require dependencies we may not have loaded yet.
# Based on https://packaging.python.org/guides/single-sourcing-package-version/
version_module_globals = {}
with open('./mpflags/version.py') as f:
    exec(f.read(), version_module_globals)
mpflags_version = version_module_globals['VERSION']


def parse_requirements(filename):
    """ load requirements from a pip requirements file """
    lineiter = (line.strip() for line in open(filename))
    return [line for line in lineiter if line and not line.startswith("#")]


install_reqs = parse_requirements('requirements.txt')
test_reqs = parse_requirements('test-requirements.txt')

setup(
    name='mpflags',
    version=mpflags_version,
    packages=find_packages(include=['mpflags', 'mpflags.*']),
    description='Feature flag evaluation for Python, locally or through the Mixpanel flags API',
    long_description='Feature flag evaluation for Python, locally or through the Mixpanel flags API',
    install_requires=install_reqs,
    python_requires='>=3.8',
    classifiers=[
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        'Topic :: Software Development :: Libraries',
    ],
    extras_require={
        "test": test_reqs,
    },
)
