from setuptools import setup, find_packages

# 扫描 src 下所有子包（得到 ["core", "core.runtime", "core.state_machine", ...]）
src_sub_packages = find_packages(where="src")

# 给每个子包名添加 "actorfsm." 前缀
actorfsm_sub_packages = [f"actorfsm.{pkg}" for pkg in src_sub_packages]

setup(
    name="actor-fsm",
    version="0.1.0",
    description="Finite-state-machine runtime with preemptive, cancellable state behaviors",
    python_requires=">=3.10",
    # 打包列表 = 主包 "actorfsm" + 带前缀的子包
    packages=["actorfsm"] + actorfsm_sub_packages,
    # 所有 "actorfsm.*" 包的源码都在 src 目录下，例：actorfsm.core → src/core
    package_dir={"actorfsm": "src"},
    install_requires=[
        "loguru>=0.7",
        "asyncer>=0.0.8",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "actorfsm-demo = actorfsm.demo:main",
        ],
    },
)
