"""Operation handlers for assistant function calls.

Every handler has the same shape::

    async def handler(arguments: dict, ctx: FunctionContext) -> FunctionResult

Handlers ground names through ``parser.references``, call the task store,
and put ``task_id``/``subtask_id`` in the result data so the conversation
remembers what was just talked about.
"""
