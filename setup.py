from setuptools import find_packages, setup
from glob import glob

package_name = 'ttt_arm_control'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(include=[package_name, f"{package_name}.*"]),
    data_files=[
        # Register this package with ament.
        ('share/ament_index/resource_index/packages', ['resource/' + package_name]),
        # Install the package manifest.
        ('share/' + package_name, ['package.xml']),
        # Limb poses, board geometry and reach tuning.
        ('share/' + package_name + '/config', glob('config/*.yaml')),
        ('share/' + package_name, ['recipes.json']),
    ],
    install_requires=['setuptools', 'numpy', 'scipy', 'PyYAML'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='erds',
    maintainer_email='erdie@qltyss.com',
    description='Closed-loop goal reaching and pick/place behaviors for a tic-tac-toe playing arm',
    license='Apache License 2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'ttt_arm = ttt_arm_control.cli:main',
        ],
    },
)
