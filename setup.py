#!/usr/bin/env python3
"""
Setup script for DevDocs to LLM.

Installs the devdocs_llm package with all dependencies.
"""

from setuptools import setup, find_packages
import os

# Read the README for long description
here = os.path.abspath(os.path.dirname(__file__))
readme_path = os.path.join(here, 'README.md')

if os.path.exists(readme_path):
    with open(readme_path, 'r', encoding='utf-8') as f:
        long_description = f.read()
else:
    long_description = 'Turn documentation sites into Markdown and XML bundles for LLMs via Firecrawl.'

# Read requirements
requirements_path = os.path.join(here, 'requirements.txt')
install_requires = []
if os.path.exists(requirements_path):
    with open(requirements_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                install_requires.append(line)

setup(
    name='devdocs-llm',
    version='1.0.0',
    author='DevDocs Team',
    author_email='',
    description='Turn documentation sites into Markdown and XML bundles for LLMs',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Text Processing :: Markup :: Markdown',
    ],
    python_requires='>=3.9',
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'devdocs-web=devdocs_llm.web.run:main',
        ],
    },
    keywords=[
        'documentation',
        'firecrawl',
        'crawler',
        'markdown',
        'xml',
        'llm',
    ],
)
