#!/usr/bin/env python3
"""
SlabTrend Setup Configuration
"""

from setuptools import setup, find_packages
import os

# Read README for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "SlabTrend - Mann-Kendall Leak Trend Detection for Kernel Slab Caches"

# Read requirements
def read_requirements():
    req_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_path):
        with open(req_path, 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

# Read version from slabtrend/__init__.py
def get_version():
    version_path = os.path.join(os.path.dirname(__file__), 'slabtrend', '__init__.py')
    if os.path.exists(version_path):
        with open(version_path, 'r', encoding='utf-8') as f:
            for line in f:
                if line.startswith('__version__'):
                    return line.split('=')[1].strip().strip('"\'')
    return '1.0.0'

setup(
    name='slabtrend',
    version=get_version(),
    author='Kyle Clouthier',
    author_email='kyle@example.com',
    description='Leak trend detection for Linux kernel slab caches using the Mann-Kendall test',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests*', 'docs*', 'examples*']),
    classifiers=[
        # Development Status
        'Development Status :: 4 - Beta',

        # Intended Audience
        'Intended Audience :: System Administrators',
        'Intended Audience :: Developers',

        # Topic
        'Topic :: System :: Monitoring',
        'Topic :: System :: Operating System Kernels :: Linux',

        # License
        'License :: OSI Approved :: MIT License',

        # Python Versions
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',

        # Operating Systems
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
    install_requires=read_requirements(),
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=22.0.0',
            'flake8>=5.0.0',
            'mypy>=1.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'slabtrend=slabtrend.cli:main',
        ],
    },
    zip_safe=False,
    keywords=[
        'memory leak detection',
        'slab allocator',
        'kernel monitoring',
        'mann-kendall',
        'trend detection',
        'time series',
    ],
)
