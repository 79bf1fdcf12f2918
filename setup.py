"""
The setup file for packaging diceroll
"""
import fnmatch
import glob
import os
import shlex
import subprocess
import sys
import tempfile
from setuptools import setup, find_packages, Command

ROOT = os.path.abspath(os.path.dirname(__file__))
if os.path.dirname(__file__) == '':
    ROOT = os.getcwd()


def make_get_input():
    """
    Simple wrapper to get input from user.
    When --yes in sys.argv, skip input and assume yes to any request.
    """
    default = False
    if '--yes' in sys.argv:
        sys.argv.remove('--yes')
        default = True

    def inner_get_input(msg):
        """
        The actual function that emulates input.
        """
        if default:
            return 'yes'

        return input(msg)
    inner_get_input.default = default

    return inner_get_input


get_input = make_get_input()


def rec_search(wildcard):
    """
    Traverse all subfolders and match files against the wildcard.

    Returns:
        A list of all matching files absolute paths.
    """
    matched = []
    for dirpath, _, files in os.walk(os.getcwd()):
        fn_files = [os.path.join(dirpath, fn_file) for fn_file
                    in fnmatch.filter(files, wildcard)]
        matched.extend(fn_files)
    return matched


def check_pytest_cov():
    """
    Exit unless pytest with the pytest-cov plugin is available.
    """
    tfile = tempfile.NamedTemporaryFile()
    with open(os.devnull, 'w') as dnull:
        with open(tfile.name, 'w') as fout:
            subprocess.Popen(shlex.split('py.test --version'),
                             stdout=dnull, stderr=fout).wait()
        with open(tfile.name, 'r') as fin:
            out = '\n'.join(fin.readlines())
        if 'pytest-cov' not in out:
            print('Please run: python setup.py deps')
            sys.exit(1)


class Clean(Command):
    """
    Equivalent of make clean.
    """
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        matched = ' '.join(rec_search('*.pyc'))
        matched += ' ' + ' '.join(glob.glob('*.egg-info') + glob.glob('*.egg'))
        cmd = 'rm -vrf .eggs .tox .pytest_cache build dist diceroll/log ' + matched
        print('Executing: ' + cmd)
        recv = get_input('OK? y/n  ').strip().lower()
        if recv.startswith('y'):
            subprocess.call(shlex.split(cmd))


class InstallDeps(Command):
    """
    Install dependencies to run & test.
    """
    description = "Install the depencies for the project."
    user_options = [
        ('force=', None, "Bypass prompt."),
    ]

    def initialize_options(self):
        self.force = None

    def finalize_options(self):
        pass

    def run(self):
        print('Installing/Upgrading runtime & testing dependencies')
        cmd = 'pip install -U ' + ' '.join(RUN_DEPS + TEST_DEPS)
        print('Executing: ' + cmd)
        if self.force:
            recv = self.force
        else:
            recv = get_input('OK? y/n  ').strip().lower()
        if recv.startswith('y'):
            out = subprocess.DEVNULL if get_input.default else None
            timeout = 150
            try:
                subprocess.Popen(shlex.split(cmd), stdout=out).wait(timeout)
            except subprocess.TimeoutExpired:
                print('Deps installation took over {} seconds, something is wrong.'.format(timeout))


class Test(Command):
    """
    Run the tests and track coverage.
    """
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        check_pytest_cov()
        old_cwd = os.getcwd()

        try:
            os.chdir(ROOT)
            subprocess.call(shlex.split('py.test --cov=diceroll'))
        finally:
            os.chdir(old_cwd)


class Coverage(Command):
    """
    Run the tests, generate the coverage html report and open it in your browser.
    """
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        check_pytest_cov()
        try:
            with open(os.devnull, 'w') as dnull:
                subprocess.check_call(shlex.split('coverage --version'), stderr=dnull)
        except (OSError, subprocess.CalledProcessError):
            print('Please run: python setup.py deps')
            sys.exit(1)

        old_cwd = os.getcwd()
        cov_dir = os.path.join(tempfile.gettempdir(), 'dicerollCoverage')
        cmds = [
            'py.test --cov=diceroll',
            'coverage html -d ' + cov_dir,
            'xdg-open ' + os.path.join(cov_dir, 'index.html'),
        ]

        try:
            os.chdir(ROOT)
            for cmd in cmds:
                subprocess.call(shlex.split(cmd))
        finally:
            os.chdir(old_cwd)


SHORT_DESC = 'Command line dice roller for tabletop RPGs with statistics'
MY_NAME = 'Jeremy Pallats / starcraft.man'
MY_EMAIL = 'N/A'
RUN_DEPS = ['numpy', 'pyyaml']
TEST_DEPS = ['coverage', 'flake8', 'mock', 'pylint', 'pytest', 'pytest-cov']
setup(
    name='diceroll',
    version='0.1.0',
    description=SHORT_DESC,
    long_description=SHORT_DESC,
    url='https://github.com/starcraftman/diceBot',
    author=MY_NAME,
    author_email=MY_EMAIL,
    maintainer=MY_NAME,
    maintainer_email=MY_EMAIL,
    license='BSD',
    platforms=['any'],

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Console',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: BSD License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Games/Entertainment :: Role-Playing',
    ],

    keywords='dice rpg roller',

    packages=find_packages(exclude=['venv', '.tox', 'tests', 'tests.*']),

    # config.yml and log.yml are read from the installed package
    package_data={
        'diceroll': ['data/*.yml'],
    },

    install_requires=RUN_DEPS,

    tests_require=TEST_DEPS,

    # $ pip install -e .[test]
    extras_require={
        'test': TEST_DEPS,
    },

    entry_points={
        'console_scripts': [
            'diceroll = diceroll.cli:main',
        ],
    },

    cmdclass={
        'clean': Clean,
        'coverage': Coverage,
        'deps': InstallDeps,
        'test': Test,
    }
)
