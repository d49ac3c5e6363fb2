'''
Containers for electrocardiogram recordings.
'''
