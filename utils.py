import os

TITLE_ART = """
 _   _      _     _       _  __
| | | | ___| | __| |     | |/ /__ _ _ __ _ __
| |_| |/ _ \\ |/ _` |_____| ' // _` | '__| '_ \\
|  _  |  __/ | (_| |_____| . \\ (_| | |  | |_) |
|_| |_|\\___|_|\\__,_|     |_|\\_\\__,_|_|  | .__/
                                        |_|
"""

INPUT_FILE_DIRECTORY = "inputs"
OUTPUT_FILE_DIRECTORY = "outputs"
INPUT_FILE_EXTENSION = ".txt"
OUTPUT_FILE_EXTENSION = ".out"
MINIMUM_CITIES = 2
MAXIMUM_CITIES = 16
MAXIMUM_COORDINATE = 10 ** 7
MAXIMUM_FLOAT_DIGITS = 5

def list_all_files(directory, extension):
    """
    List all files under path
    """
    files = get_files_with_extension(directory, extension)
    for file in files:
        print(file)

def get_files_with_extension(directory, extension):
    """
    Get all files end with specified extension under directory
    """
    files = []
    for file in os.listdir(directory):
        if file.endswith(extension):
            files.append(file)
    return sorted(files)

def input_file_names_to_file_path(user_in_files, in_files_all, directory=INPUT_FILE_DIRECTORY):
    """
    Resolve user supplied file names against the files found in directory.
    A name may be given with or without the input extension.

    Returns:
        tuple: (file_paths, message) where message lists the names that
        could not be found, or is empty.
    """
    if isinstance(user_in_files, str):
        user_in_files = user_in_files.split()
    file_paths = []
    message = ''
    for file in user_in_files:
        if file in in_files_all:
            file_paths.append(os.path.join(directory, file))
        else:
            file_con = file + INPUT_FILE_EXTENSION
            if file_con in in_files_all:
                file_paths.append(os.path.join(directory, file_con))
            else:
                message += f'{file} '
    if message:
        message = 'Input ' + message + 'Not Exist'
    return file_paths, message

def read_file(file):
    """
    Read all lines in file
    Store the data in a list of lines
    where each line is splited to list of words
    """
    with open(file, 'r') as f:
        lines = f.readlines()
    return [line.strip().split() for line in lines if line.strip()]

def write_to_file(file, data, mode='w'):
    """
    Write data into file
    Default mode: 'w'
    """
    with open(file, mode) as f:
        f.write(data)

if __name__ == "__main__":
    list_all_files(INPUT_FILE_DIRECTORY, INPUT_FILE_EXTENSION)
