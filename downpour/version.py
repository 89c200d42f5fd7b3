DP_VER = '0.1.0'
