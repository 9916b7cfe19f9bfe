"""Combinator laws and algebra documentation."""

# Combinators satisfy the following laws (== means: same outcome for every input):
#
# 1. Repeat identity: repeat(lambda _: False)(task) == unary(lambda x: x)
#    A predicate that never holds never runs the task
#
# 2. Constant absorbs input: sequence([task, constant(v)]) == constant(v)
#    whenever task succeeds; failures still short-circuit
#
# 3. Single-round chain: chained(continuer=lambda _: False, aggregator=f)(task)
#    == task followed by unary(f(input))
#
# 4. Record mirrors keys: the result of record(o)(tasks) has exactly the keys of
#    tasks; keys absent from the input hold {}
#
# 5. Failure is sticky: a failed round of repeat/chained is the outcome of the whole
#    activation, reason unchanged
#
# 6. Cancel is idempotent: cancel(); cancel() == cancel(), and a no-op once settled
