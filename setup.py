from setuptools import setup
import re


def derive_version() -> str:
    version = ''
    with open('snowtransfer/__init__.py') as f:
        version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]', f.read(), re.MULTILINE).group(1)

    if not version:
        raise RuntimeError('version is not set')

    if version.endswith(('a', 'b', 'rc')):
        # append version identifier based on commit count
        try:
            import subprocess

            p = subprocess.Popen(['git', 'rev-list', '--count', 'HEAD'], stdout=subprocess.PIPE, stderr=subprocess.PIPE)
            out, err = p.communicate()
            if out:
                version += out.decode('utf-8').strip()
            p = subprocess.Popen(['git', 'rev-parse', '--short', 'HEAD'], stdout=subprocess.PIPE, stderr=subprocess.PIPE)
            out, err = p.communicate()
            if out:
                version += '+g' + out.decode('utf-8').strip()
        except Exception:
            pass

    return version


extras_require = {
    'speed': [
        'orjson>=3.5.4',
    ],
    'test': [
        'pytest',
        'pytest-asyncio',
        'typing-extensions>=4.3,<5',
    ],
}

setup(
    name='snowtransfer',
    version=derive_version(),
    description='A rate limit aware client for the Discord REST API',
    license='MIT',
    packages=[
        'snowtransfer',
        'snowtransfer.methods',
        'snowtransfer.types',
    ],
    python_requires='>=3.8',
    install_requires=[
        'aiohttp>=3.7.4,<4',
        'typing-extensions>=4.3,<5',
    ],
    extras_require=extras_require,
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'License :: OSI Approved :: MIT License',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet',
        'Topic :: Software Development :: Libraries',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Utilities',
        'Typing :: Typed',
    ],
)
