from rich.pretty import pprint

from commando import *


command = Command.define(colorful=True)
command.set_help("Greets somebody, optionally more than once.")
command.option("n").aka("name").describe("who to greet").default("world")
command.option("t").aka("times").describe("how many times").must(str.isdigit).map(int).default("1")
command.option("v").aka("verbose").describe("chattiness, up to three levels").count(3)
command.option("s").aka("shout").describe("greet in uppercase").boolean()


if __name__ == '__main__':
    if command.parse() == 0 and not command.showed_help:
        greeting = "hello, %s!" % command["name"]
        for _ in range(command["times"]):
            print(greeting.upper() if command["shout"] else greeting)
        if command["verbose"]:
            pprint(command.get_flag_values())
