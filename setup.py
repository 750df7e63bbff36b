import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

with open('VERSION', 'r') as fh:
    VERSION = fh.read().strip()

setuptools.setup(
    name="hyprinstall",
    version=VERSION,
    description="E-ink themed Hyprland desktop installer for Arch Linux",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=['hyprinstall', 'hyprinstall.*']),
    classifiers=[
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires='>=3.12',
    install_requires=[
        'pydantic',
        'lz4',
    ],
    extras_require={
        'test': ['pytest'],
    },
    package_data={'hyprinstall': ['templates/*.conf', 'templates/*.jsonc', 'templates/*.css', 'templates/*.sh']},
    entry_points={
        'console_scripts': [
            'hyprinstall=hyprinstall:run_as_a_module',
        ],
    },
)
