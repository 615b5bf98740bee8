from setuptools import find_packages, setup

package_name = "tape_vision"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
        ("share/" + package_name + "/config", ["config/frc.json"]),
    ],
    install_requires=[
        "setuptools",
        "numpy",
        "opencv-python",
    ],
    zip_safe=True,
    maintainer="root",
    maintainer_email="root@todo.todo",
    description="Retro-reflective tape target detection and ranging for a robot coprocessor",
    license="BSD-3-Clause",
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "tape_target_subscriber = tape_vision.tape_target_subscriber:main",
            "camera_publisher = tape_vision.camera_publisher:main",
        ],
    },
)
