"""ProjectFlow-AI.

Agent execution core for the ProjectFlow project-management application: a
runtime that lets an LLM work on a user's projects through permissioned tools
while persisting an auditable record of each run.

Core subpackages
----------------

- ``projectflow_ai.core``: settings, logging and database helpers (SQLModel
  entities for the application tables the agents touch).
- ``projectflow_ai.agent_core``:

  - the agent contract and the project planning agent,
  - tool contract, registry and the project/task tools,
  - the LLM client contract and its Pydantic AI implementation,
  - the run lifecycle (``AgentRunner``) and its repositories.
"""
