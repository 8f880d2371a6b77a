"""Infrastructure layer — dependency registry, registry graph, schema adapters.

Depends on the domain layer and third-party libs (NetworkX, optionally
graphql-core). ``DependencyNode.load`` hands off to the service layer
through a deferred import.
"""
