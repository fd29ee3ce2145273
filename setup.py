from setuptools import setup

setup(
    name='jhsiao-fdio',
    version='0.0.1',
    author='Jason Hsiao',
    author_email='oaishnosaj@gmail.com',
    description='Buffered, timeout-aware reading from file descriptors',
    packages=['jhsiao', 'jhsiao.fdio'],
    python_requires='>=3.6',
    extras_require={'test': ['pytest']},
)
