import os, sys
from setuptools import setup, find_namespace_packages
from setuptools.command.build_py import build_py as _build

CLASSIFIERS = [
    'Operating System :: POSIX',
    'Operating System :: MacOS :: MacOS X',
    'Intended Audience :: Science/Research',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: System :: Archiving :: Backup'
]

pkgdir = os.path.dirname(os.path.abspath(__file__))

def get_version():
    out = "dev"
    versfile = os.path.join(os.environ.get('PACKAGE_DIR', pkgdir), 'VERSION')
    if os.path.exists(versfile):
        with open(versfile) as fd:
            parts = fd.readline().split()
        if len(parts) > 0:
            out = parts[-1]
    return out

def write_version_mod(version, builddir):
    versmodf = os.path.join(builddir, "nistoar", "replicate", "version.py")
    if not os.path.exists(os.path.dirname(versmodf)):
        return
    print("setting version for nistoar.replicate")
    with open(versmodf, 'w') as fd:
        fd.write('"""')
        fd.write("""
An identification of the subsystem version.  Note that this module file gets
(over-) written by the build process.
""")
        fd.write('"""\n\n')
        fd.write('__version__ = "')
        fd.write(version)
        fd.write('"\n')

class build(_build):

    def run(self):
        _build.run(self)
        write_version_mod(get_version(), self.build_lib)

setup(name='nistoar.replicate',
      version=get_version(),
      description="nistoar.replicate: backup and restore of repository objects as archival packages (AIPs)",
      scripts=[ ],
      package_dir={'': 'python'},
      packages=find_namespace_packages(where='python', include=['nistoar.*']),
      install_requires=[ 'pyyaml' ],
      extras_require={ 'test': [ 'pytest' ] },
      cmdclass={'build_py': build},
      classifiers=CLASSIFIERS,
      python_requires='>=3.7',
      zip_safe=False
)
