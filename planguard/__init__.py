"""planguard.

This package turns a user goal into a guarded, step-by-step execution: a
language model proposes a plan, policy checks it, and only then do tools run.

High-level architecture
-----------------------

The codebase is organized around a strict separation of *proposal* and
*effect*:

- **Planning**: the model only ever produces a structured plan (tool calls,
  reasoning notes, a final response). Planning never performs side effects.
- **Guarding**: the whole plan is checked by guardrails (allowed file paths,
  tool-call rate limits) before the first step runs. A rejected plan has no
  side effects at all.
- **Execution**: admitted plans run one step at a time, can be cancelled
  between steps, and report a per-step result.

Core subpackages
----------------

- ``planguard.agent_core``: plan model and parser, planner, rule engine,
  guardrails, executor, tools, memory and the model provider adapter.
- ``planguard.core``: settings and logging configuration.

Typical workflow
----------------

Most integrations should use ``planguard.agent_core.factory.build_agent_service``
and call ``AgentService.run(goal)``.
"""
