from setuptools import find_packages
from setuptools import setup

version = '0.4.0'

install_requires = [
    'cryptography>=43.0.0',
    # Only jose.utils, jose.constants and jose.exceptions are used; the
    # python-jose JWS/JWT layers are not.
    'python-jose>=3.3.0',
]

test_extras = [
    'pytest',
    'pytest-xdist',
]

setup(
    name='jose-jwa',
    version=version,
    description='JSON Web Algorithms (RFC 7518) registry and dispatch layer',
    author="jose-jwa contributors",
    license='Apache License 2.0',
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Topic :: Security',
        'Topic :: Security :: Cryptography',
    ],

    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    include_package_data=True,
    package_data={'jose_jwa': ['py.typed', '_internal/tests/testdata/*']},
    install_requires=install_requires,
    extras_require={
        'test': test_extras,
    },
)
