import os

import setuptools  # noqa: F401,E402

# Requirements for our application
core_deps = [
    "click>=8.1.7,<8.2",
    "pydantic>=2.8.2,<3",
    "PyYAML>=6.0.1,<7",
    "sarge==0.1.7.post1",
]

# Additional requirements for optional install options and/or OS-specific dependencies
extra_deps = {
    # test dependencies
    "test": [
        "ddt",
        "pytest",
    ],
}


def get_version(pkg_path):
    from importlib.util import module_from_spec, spec_from_file_location

    spec = spec_from_file_location("version", os.path.join(pkg_path, "_version.py"))
    module = module_from_spec(spec)
    spec.loader.exec_module(module)

    data = module.get_data()
    return data["version"]


if __name__ == "__main__":
    setuptools.setup(
        name="QuickSlice",
        version=get_version(os.path.join("src", "quickslice")),
        description="Slicing presets, config bundles and one-shot quick slicing for Slic3r",
        license="AGPL-3.0-or-later",
        python_requires=">=3.8,<4",
        package_dir={"": "src"},
        packages=setuptools.find_packages(where="src"),
        include_package_data=True,
        install_requires=core_deps,
        extras_require=extra_deps,
        entry_points={"console_scripts": ["quickslice = quickslice.cli:quickslice_cli"]},
        classifiers=[
            "Environment :: Console",
            "License :: OSI Approved :: GNU Affero General Public License v3",
            "Programming Language :: Python :: 3",
        ],
    )
