"""A one-process application: a greeter service behind a health check.

    wiregen check examples/hello_app/wiring.py
    wiregen compile examples/hello_app/wiring.py -o build/hello_app
    pip install -e build/hello_app/greeter -e build/hello_app/wiregen_gen_frontend
    python -m frontend.main
"""

from pathlib import Path

from wiregen import Constructor, IRGraph, Method, ServiceInterface, TypeName, Variable
from wiregen.plugins import ConfigValue, HealthCheckWrapper, Process, WorkflowService

WORKFLOW_DIR = Path(__file__).parent / "workflow"

STR = TypeName(name="str")

graph = IRGraph("hello_app")

greeting_prefix = graph.add(ConfigValue("greeting_prefix", "Hello"))

greeter = graph.add(
    WorkflowService(
        "greeter",
        module_path=WORKFLOW_DIR,
        module_short_name="greeter",
        interface=ServiceInterface(
            name="Greeter",
            package="greeter.service",
            methods=(Method(name="greet", arguments=(Variable(name="name", type=STR),), returns=STR),),
        ),
        constructor=Constructor(
            package="greeter.service",
            name="new_greeter",
            arguments=(Variable(name="prefix", type=STR),),
        ),
        args=[greeting_prefix],
    ),
)

greeter_hc = graph.add(HealthCheckWrapper("greeter_hc", greeter))

frontend = graph.add(Process("frontend", contained=[greeting_prefix, greeter, greeter_hc]))
