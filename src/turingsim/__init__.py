from turingsim.tape import Move, Tape
from turingsim.turing_machine import HALT, Machine, Transition, UndefinedState, UndefinedTransition

__all__ = ["HALT", "Machine", "Move", "Tape", "Transition", "UndefinedState", "UndefinedTransition"]
