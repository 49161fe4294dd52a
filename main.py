from rich.pretty import pprint

from conso import *


def declare(ctx):
    ctx.command("greet") \
        .description("Give the world a wonderful greeting") \
        .run(lambda: print("Hello world!"))

    ctx.command("multiply") \
        .description("Multiply two numbers below a hundred") \
        .arg(range(0, 100)) \
        .arg(range(0, 100)) \
        .run(lambda a, b: print(f"{a} * {b} = {a * b}"))

    ctx.command("shell") \
        .description("Evaluate commands interactively") \
        .user_loop(shell)


def shell(ctx):
    ctx.command("echo") \
        .arg(str) \
        .run(lambda word: print(word))

    ctx.command("quit") \
        .run_with(lambda run: run.quit())


if __name__ == '__main__':
    pprint(args(declare))
