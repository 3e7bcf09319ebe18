# This class is used for exceptions that can be directly displayed to the user
class UserFriendlyError(Exception):
    pass


# This class indicates an issue with the syntax of a command
class CommandSyntaxError(Exception):
    pass


# Used when someone other than the bot masters tries to change the starting LP
class NotAllowedError(UserFriendlyError):
    def __init__(self, msg="Only the bot masters can set the starting rank. Try /record without anything after it.", *args, **kwargs):
        super().__init__(msg, *args, **kwargs)
