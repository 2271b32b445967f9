"""Resource acceptance-test toolkit.

Resource controllers map declarative configurations for AWS Storage Gateway
tape pools and EC2 placement groups onto the service APIs; the verification
harness drives them through multi-step create/update/import/destroy
scenarios and checks the live objects after every step.

Key Components:
    - domain: resource schemas, instances, tags, value objects and errors
    - providers.aws.resources: the controllers
    - harness: configurations, plan/apply engine, checks, scenarios, sweepers
"""
from ._package import __version__

__all__: list[str] = ["__version__"]
