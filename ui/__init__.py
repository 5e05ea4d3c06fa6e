"""tkinter front end for Chart Station."""
