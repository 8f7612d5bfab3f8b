import setuptools


if __name__ == "__main__":
    setuptools.setup(
        name="git-checkout-ago",
        version="0.1.0",
        description="Check out the most recent Git commit before a given time.",
        packages=["checkout_ago"],
        python_requires=">=3.8",
        install_requires=["colorama", "pygit2>=1.14", "typing_extensions"],
        extras_require={"test": ["pytest", "py"]},
        entry_points={
            "console_scripts": ["git-checkout-ago=checkout_ago.__main__:entry_point"]
        },
    )
