"""
Validators run by ModelValidator.

Modules:
    instance: base-type checks on model classes
    classifier: which methods are relation methods
    executor: running relations and checking their output
    registry: relation edges seen during a run
    back_relations: back-relation consistency over the registry
    mapped: relationship() attributes as relations
"""
