"""
jargo: build tool for Java applications driven by a declarative descriptor.
"""

__version__ = "0.1.0"

from invoke import Collection

# Create namespace and collect tasks from each submodule
namespace = Collection()

# Aliased so the jargo.build package attribute is not shadowed
from .tasks import build as build_tasks, project as project_tasks

for submodule in [build_tasks, project_tasks]:
    submodule_collection = Collection.from_module(submodule)
    for task_name, task in submodule_collection.tasks.items():
        namespace.add_task(task)
