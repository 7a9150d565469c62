"""
argspec argument matcher.

Matcher walks one argument vector against an ordered descriptor list, assigning
values to the descriptors it recognises and building the compacted vector (the
input with every consumed option removed).

Scan rules, for each token after the program name:
1. After a literal "--", or for a token not starting with "-": pass through.
2. "--": start skipping, dropped.
3. "--help": sticky help flag, helper(program) is called, dropped.
4. The first descriptor whose matches() accepts the token consumes it, along with
   arity value tokens for unattached options. SKIP keeps all of them in the output.
   The setter reads the tokens that follow, consumed or not, so a string list
   whose arity is still 0 takes the next token as its value and leaves it in place.
5. Otherwise, when some boolean has a two-character name, the token is tried as a
   cluster of single-letter booleans (-abc).
6. Otherwise the token is reported as unrecognised and passed through.

Diagnostics are handed to the sink and never raised. Matching succeeds unless a
required option is left unset.
"""
from .arguments import ArgumentKind
from .faults import *


class Matcher:
    """
    Single-pass matcher over a descriptor list.

    resume=False keeps the historical behavior of abandoning the scan on a missing
    value (the option and every remaining token are dropped from the output);
    resume=True drops only the offending option and keeps scanning.
    """

    def __init__(self, arguments, sink, *, helper=None, resume=False):
        self._arguments = arguments
        self._sink = sink
        self._helper = helper
        self._resume = resume
        self.help = False
        self.skipping = False

    def match(self, tokens, /):
        """
        Scan tokens (tokens[0] being the program name) and return (success, output).
        """
        tokens = list(tokens)
        output = tokens[:1]
        self.skipping = False

        index = 1
        while index < len(tokens):
            token = tokens[index]
            index += 1

            if self.skipping or not token.startswith("-"):
                output.append(token)
                continue

            if token == "--":
                self.skipping = True
                continue

            if token == "--help":
                self.help = True
                if self._helper is not None:
                    self._helper(tokens[0] if tokens else "")
                continue

            for argument in self._arguments:
                if argument.matches(token):
                    break
            else:
                argument = None

            if argument is None:
                output.extend(self._cluster(token))
                continue

            # the setter sees every remaining token, only count of them are consumed
            count = 0 if argument.attached else argument.arity
            values = tokens[index:]
            if argument.attached:
                values.insert(0, token[len(argument.name):])

            if index + count > len(tokens) or not (values or argument.kind is ArgumentKind.BOOLEAN):
                self._sink(MissingValueError(
                    f"missing value for option {argument.name!r}",
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint=f"{argument.name} expects {argument.placeholder or 'a value'}",
                ))
                if self._resume:
                    continue
                break

            if not argument.assign(values):
                self._sink(InvalidValueError(
                    f"invalid value {values[0]!r} for {argument.kind} option {argument.name!r}",
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    hint=self._hint(argument),
                ))

            if argument.skip:
                output.append(token)
                output.extend(tokens[index:index + count])

            index += count

        return self.checkrequired(), output

    def _cluster(self, token):
        """
        Try a token as combined single-letter booleans; returns the output tokens.
        """
        letters = {}
        for argument in self._arguments:
            if argument.kind is ArgumentKind.BOOLEAN and len(argument.name) == 2:
                letters.setdefault(argument.name[1], []).append(argument)

        if not letters:
            self._sink(UnrecognisedArgumentWarning(
                f"unrecognised argument {token!r}",
                title="unrecognised argument",
                code=FaultCode.UNRECOGNISED_ARGUMENT,
            ))
            return [token]

        if token == "-":
            return [token]

        for char in token[1:]:
            if char not in letters:
                self._sink(UnrecognisedArgumentWarning(
                    f"unrecognised argument '-{char}' in {token!r}",
                    title="unrecognised argument",
                    code=FaultCode.UNRECOGNISED_ARGUMENT,
                ))
                return [token]

        output = []
        for char in token[1:]:
            for argument in letters[char]:
                argument.assign(())
                if argument.skip:
                    output.append("-" + char)
        return output

    def _hint(self, argument):
        match argument.kind:
            case ArgumentKind.CHOICE:
                return "expected one of " + ", ".join(argument.choices)
            case ArgumentKind.INTEGER:
                return "expected an integer, e.g. 42 or -7"
            case ArgumentKind.REAL:
                return "expected a real number, e.g. 3, -4.5 or 6.02e23"
        return None

    def checkrequired(self):
        """
        Report every required descriptor left unset; True when there is none.
        """
        success = True
        for argument in self._arguments:
            if argument.required and not argument.isset:
                self._sink(RequiredMissingError(
                    f"required option {argument.name!r} was not supplied",
                    title="required missing",
                    code=FaultCode.REQUIRED_MISSING,
                ))
                success = False
        return success


__all__ = (
    "Matcher",
)
